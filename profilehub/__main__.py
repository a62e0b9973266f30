from profilehub.main import run

run()
