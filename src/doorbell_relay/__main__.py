from doorbell_relay.cli import main

main()
