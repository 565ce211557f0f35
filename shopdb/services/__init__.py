"""Service layer. Every function takes the session of the current call first."""
