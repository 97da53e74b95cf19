from contentspec import ContentSpecParser, ParserResults


def parse(text: str, **kwargs) -> ParserResults:
    return ContentSpecParser().parse(text, **kwargs)


def error_messages(results: ParserResults):
    return [d.message for d in results.errors]
