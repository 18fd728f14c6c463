from diagram.cli import main

main()
