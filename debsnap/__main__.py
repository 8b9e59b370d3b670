from debsnap.cli import main

main()
