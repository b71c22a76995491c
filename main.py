from toplists.crawler.run import main

if __name__ == "__main__":
    # Headful by default so the Cloudflare check can be cleared by hand; pass
    # --headless for unattended runs with replayed cookies.
    raise SystemExit(main())
