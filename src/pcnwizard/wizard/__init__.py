"""Contest wizard: screens, answers, gates, routing and the engine."""
