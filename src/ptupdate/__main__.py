from ptupdate.cli import main

main()
