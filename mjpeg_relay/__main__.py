from mjpeg_relay.main import run

run()
