"""Graph description output and layout round-trip."""
