from core.config import load_env, get_settings


def main() -> None:
    load_env()
    settings = get_settings()

    print("Moddo is set up ✅")
    print("Data dir:", settings.data_dir)
    print("Files dir:", settings.files_dir)
    print("EDGEONE_API_KEY loaded:", bool(settings.edgeone_api_key))


if __name__ == "__main__":
    main()
