from tickdown.cli.main import cli

cli(prog_name="tickdown")
