"""Centralized message constants for error messages, validation, and logging."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Session / queue errors
    NO_ACTIVE_QUEUE = "No active queue."
    SESSION_NOT_FOUND = "No session for destination {session_id}"
    INVALID_SONG_INDEX = "Invalid song index."
    CANNOT_REMOVE_NOW_PLAYING = "Cannot remove the track that is now playing."
    MALFORMED_SNAPSHOT_TRACK = "Snapshot contains {count} malformed track field(s)."
    MALFORMED_SNAPSHOT_SONGS = "Snapshot songs must be a list."
    INVALID_QUERY = "No valid query provided."

    # Transport errors
    ALREADY_PAUSED = "Playback is already paused."
    NOT_PAUSED = "Playback is not paused."
    INVALID_VOLUME = "Volume must be a number between 0 and 100."
    INVALID_VOLUME_STEP = "Volume step must be a non-negative number."
    INVALID_LOOP_MODE = "Invalid loop mode. Use off, track, or queue."
    INVALID_SEEK = "Invalid seek time."

    # Filter errors
    INVALID_FILTER = "Invalid filter."
    FILTER_NOT_ACTIVE = "Filter '{name}' is not active."
    FILTER_ALREADY_ACTIVE = "Filter '{name}' is already active."
    FILTERS_NOT_A_LIST = "Filters must be a list of names."
    INVALID_SPEED = "Speed must be between 0.5x and 2x."
    INVALID_EQUALIZER = "Invalid equalizer type. Use bass, treble, or normal."
    INVALID_FADE_DURATION = "Duration must be a positive number of seconds."

    # Voting errors
    INVALID_MEMBER_COUNT = "Eligible member count must be a non-negative integer."

    # Track errors
    EMPTY_TRACK_ID = "Track ID cannot be empty"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Configuration errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN is not set; cannot start the Discord client."


class LogTemplates:
    """Log message templates; pass values as logger arguments."""

    # Session lifecycle
    SESSION_CREATED = "Created playback session for destination %s"
    SESSION_REMOVED = "Removed playback session for destination %s"
    SESSION_DESTROYED = "Destroyed playback session for destination %s (%s)"

    # Queue operations
    QUEUE_ENQUEUED = "Enqueued '%s' at position %d in session %s"
    QUEUE_ENQUEUED_LIST = "Enqueued %d tracks in session %s"
    QUEUE_REMOVED = "Removed '%s' from queue in session %s"
    QUEUE_CLEARED = "Cleared %d upcoming tracks in session %s"
    QUEUE_SHUFFLED = "Shuffled queue in session %s"
    QUEUE_JUMPED = "Jumped to position %d in session %s"
    QUEUE_STOPPED = "Stopped session %s"
    QUEUE_RESTORED = "Restored %d tracks into session %s"

    # Playback operations
    PLAYBACK_STARTED = "Now playing '%s' in session %s"
    PLAYBACK_SKIPPED = "Skipped track in session %s"
    PLAYBACK_FINISHED = "Queue finished in session %s"
    PLAYBACK_PAUSED = "Paused playback in session %s"
    PLAYBACK_RESUMED = "Resumed playback in session %s"
    PLAYBACK_ERROR = "Playback error in session %s: %s"
    VOLUME_CHANGED = "Volume set to %d in session %s"
    LOOP_MODE_CHANGED = "Loop mode changed to %s in session %s"
    OPERATION_FAILED = "Operation '%s' failed in session %s: %s"

    # Filters
    FILTER_ADDED = "Added filter '%s' in session %s"
    FILTER_REMOVED = "Removed filter '%s' in session %s"
    FILTER_REPLACED = "Set filter '%s' in session %s"

    # Voting
    VOTE_RECORDED = "Skip vote in session %s: %d/%d (members=%d)"
    VOTE_PASSED = "Skip vote passed in session %s with %d votes"

    # Persistence
    SNAPSHOT_SAVED = "Saved queue snapshot for session %s to %s"
    SNAPSHOT_SAVE_FAILED = "Failed to save queue snapshot to %s: %r"
    SNAPSHOT_LOADED = "Loaded queue snapshot from %s"
    SNAPSHOT_LOAD_FAILED = "Failed to load queue snapshot from %s: %r"

    # History
    HISTORY_RECORDED = "Recorded history entry '%s' for session %s"
    HISTORY_CLEARED = "Cleared %d history entries"
    HISTORY_APPEND_FAILED = "Failed to record history entry '%s' for session %s: %r"

    # Database
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Voice transport
    VOICE_CONNECTED = "Connected to voice channel %s"
    VOICE_DISCONNECTED = "Disconnected from voice channel %s"
    VOICE_CHANNEL_NOT_FOUND = "Voice channel %s not found"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"

    # Host lifecycle
    HOST_STARTING = "Starting session player (environment=%s)"
    HOST_SETUP_COMPLETE = "Session player ready; voice transport attached"
    HOST_STOPPED = "Session player stopped"
    HOST_KEYBOARD_INTERRUPT = "Interrupted, shutting down"
    HOST_FATAL_ERROR = "Fatal error while running the Discord client: %s"
    CHANNEL_EMPTIED = "Voice channel %s has no listeners left"

    # Events
    EVENT_HANDLER_FAILED = "Error in handler for %s: %s"
