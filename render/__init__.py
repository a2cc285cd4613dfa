from render.deck import build_deck, export_deck

__all__ = ["build_deck", "export_deck"]
