from .game import main

"""Module entry to run the game with python -m tty_pong."""

if __name__ == "__main__":
    raise SystemExit(main())
