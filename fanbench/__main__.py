from fanbench.cli import main

main()
