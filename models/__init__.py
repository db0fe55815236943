from .vote_model import Vote

__all__ = ['Vote']
