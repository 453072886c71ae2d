"""
Rules and search engine for Chess 2.0, an N x N chess variant with upgradeable pieces.

Modules:
    config         — Dataclass configuration loaded from TOML
    core.board     — Board, piece and ability model, standard layout
    core.moves     — Legal move generation per piece ability set
    core.rules     — Move application: captures, mimicry, shields, turn flow
    core.upgrades  — Upgrade catalogue and application
    core.evaluator — Static evaluation
    core.search    — Alpha-beta search under a time budget
    main           — Game session (undo history, prompts, computer replies)
"""
