"""
Application Layer

Orchestrates domain objects behind async, per-session serialized services.

Structure:
- services/: Session registry, playback commands, queue persistence
- interfaces/: Port interfaces for infrastructure adapters
"""
