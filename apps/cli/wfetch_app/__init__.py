"""wfetch command line application."""
