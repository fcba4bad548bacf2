"""nfbrowser command line interface."""
