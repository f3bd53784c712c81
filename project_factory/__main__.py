from project_factory.cli import main

main()
