"""Command-line and payload surfaces for contactgraph."""
