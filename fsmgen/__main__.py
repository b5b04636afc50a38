from fsmgen.cli import main

main()
