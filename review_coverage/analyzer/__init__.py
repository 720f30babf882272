"""Analysis phases: filtering, touch detection and line counting."""
