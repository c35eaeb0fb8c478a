"""HTTP surface for the contest wizard."""
