"""Services that orchestrate the analysis modules over a full credential set."""
