from .config import NoteConfig, load_config

__all__ = ["NoteConfig", "load_config"]
