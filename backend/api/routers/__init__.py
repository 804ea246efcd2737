"""API routers: features, quiz leaderboard, session history and system."""
