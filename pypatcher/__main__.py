from pypatcher.cli import main

main()
