from modlist.cli import main

main()
