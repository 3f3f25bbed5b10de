from xdp_check.cli.app import main

main()
