from ppg_link.cli import run

run()
