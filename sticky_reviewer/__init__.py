"""Backend for the sticky review bar widget."""
