from railsmith.cli import main

main()
