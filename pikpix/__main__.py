from pikpix.cli.main import run

run()
