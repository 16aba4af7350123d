from dirty.cli import main

main()
