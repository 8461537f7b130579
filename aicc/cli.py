from aicc.interface.cli.cli import cli


def main() -> None:
    cli(prog_name="aicc")


if __name__ == "__main__":
    main()
