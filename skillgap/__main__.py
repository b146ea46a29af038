from skillgap.main import run

run()
