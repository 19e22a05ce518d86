"""GAIAthon notification service package."""
