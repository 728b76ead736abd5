from zenovia.server import main

main()
