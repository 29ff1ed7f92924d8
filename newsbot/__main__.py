from newsbot.app import main

main()
