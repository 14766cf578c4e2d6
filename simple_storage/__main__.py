from simple_storage.cli.main import main

main()
