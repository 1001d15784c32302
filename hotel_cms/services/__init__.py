"""Business logic over the website, user and message stores."""
