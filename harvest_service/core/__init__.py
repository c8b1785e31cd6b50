"""Exception hierarchy for the harvester."""
