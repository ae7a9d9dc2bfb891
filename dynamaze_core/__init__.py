"""
Dynamaze core Python package.

Pure rules logic for a tile-sliding maze board game: a grid of rotatable
passage tiles, one loose tile inserted from the edge each turn, and tokens
that walk along connected passages.
Modules:
- tile.py: Direction, Shape, Tile
- board.py: Board, PlayerToken, insertion and reachability
- deal.py: seeded board dealing
- turns.py: insert-then-move turn controller, targets and scoring
- codec.py: JSON-ready encoding of a game
"""
