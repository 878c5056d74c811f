"""RunPlanner - running training plans anchored to a race date."""
