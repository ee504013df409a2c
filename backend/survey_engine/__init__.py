"""Survey Scoring & Logic Engine."""
