from reddit_mcp.main import main

main()
