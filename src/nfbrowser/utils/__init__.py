"""Small helpers shared across nfbrowser."""
