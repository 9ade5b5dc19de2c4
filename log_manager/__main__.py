from log_manager.cli import main

main()
