from pi.views.cli import main

main()
