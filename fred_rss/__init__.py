"""Terminal feed reader with background fetching."""
