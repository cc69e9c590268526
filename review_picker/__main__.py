from review_picker.server import main

main()
