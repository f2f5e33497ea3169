"""
PancakeSwap Prediction V2 bot.

    python -m bettor.pancakeswap [--with]
"""
from bettor.cli import main as cli_main


def main():
    cli_main("pancakeswap")


if __name__ == "__main__":
    main()
