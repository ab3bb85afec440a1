"""Bundled 60-card deck lists (text files read by game_setup.load_deck_from_file)."""
