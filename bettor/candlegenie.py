"""
CandleGenie Prediction V3 bot.

    python -m bettor.candlegenie [--with]
"""
from bettor.cli import main as cli_main


def main():
    cli_main("candlegenie")


if __name__ == "__main__":
    main()
