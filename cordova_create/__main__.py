from .creator import main

main()
