from mygit.main import run

run()
