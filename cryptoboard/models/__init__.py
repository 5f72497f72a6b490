from cryptoboard.models.article import ArticleColumns, GuardianArticle, TimesArticle, SocialArticle

__all__ = ["ArticleColumns", "GuardianArticle", "TimesArticle", "SocialArticle"]
