from hubactions.cli.main import main

main()
