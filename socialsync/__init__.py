"""SocialSync - aggregated Instagram/YouTube content dashboard."""
